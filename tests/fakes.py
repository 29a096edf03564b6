"""
Stand-ins for the browser, timer, stores and sinks used by the scrape loop.
"""

from monitoring.models import DisabledRecord, RecordKind

MENU_URL = "https://merchant.example.com/venue/menu"

AUTHENTICATED_HTML = "<html><body><div class='menu'>Menu editor</div></body></html>"
LOGIN_HTML = "<html><body><form><input type='email' name='email'></form>Sign in</body></html>"


class FakeBrowser:
    def __init__(self, url=MENU_URL, html=AUTHENTICATED_HTML):
        self.url = url
        self.html = html
        self.cookies = [{"name": "session", "value": "abc", "domain": ".example.com"}]
        self.running = False
        self.launches = 0
        self.closes = 0
        self.reloads = 0
        self.cache_clears = 0
        self.navigations = []
        self.applied_cookies = []
        self.reload_error = None
        self.launch_error = None
        self.typed = []
        self.has_submit_button = True

    @property
    def is_running(self):
        return self.running

    def launch(self):
        if self.launch_error:
            raise self.launch_error
        self.launches += 1
        self.running = True

    def close(self):
        self.closes += 1
        self.running = False

    def navigate(self, url, timeout=60, settle_seconds=0):
        self.navigations.append(url)
        self.url = url

    def reload(self, timeout=30):
        self.reloads += 1
        if self.reload_error:
            raise self.reload_error

    def current_url(self):
        return self.url

    def page_source(self):
        return self.html

    def evaluate(self, script, *args):
        return None

    def get_cookies(self):
        return list(self.cookies)

    def set_cookies(self, cookies):
        self.applied_cookies.append(list(cookies))

    def clear_cache(self):
        self.cache_clears += 1

    def type_into(self, selector, text, timeout=10):
        self.typed.append((selector, text))

    def click_button_with_text(self, keywords):
        return self.has_submit_button


class ManualTimer:
    """Stands in for PeriodicTimer; tests fire ticks by hand."""

    def __init__(self, interval, callback):
        self.interval = interval
        self.callback = callback
        self.is_active = False
        self.starts = 0
        self.stops = 0

    def start(self, initial_delay=None):
        self.is_active = True
        self.starts += 1

    def stop(self):
        self.is_active = False
        self.stops += 1

    def fire(self):
        self.callback()


class RecordingSink:
    def __init__(self):
        self.sent = []

    def send(self, snapshot):
        self.sent.append(snapshot)


class RecordingAlerts:
    def __init__(self):
        self.messages = []

    def send(self, message):
        self.messages.append(message)
        return []


class MemorySessionStore:
    def __init__(self, cookies=None):
        self.cookies = cookies
        self.saves = 0

    def load(self):
        return self.cookies

    def save(self, cookies):
        self.cookies = list(cookies)
        self.saves += 1


class FakeClock:
    def __init__(self, start=1_700_000_000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def make_record(name, kind=RecordKind.ITEM, group=None):
    if kind is RecordKind.OPTION:
        return DisabledRecord(kind=kind, name=name, option_group=group or "Extras")
    return DisabledRecord(kind=kind, name=name)
