"""
Database Configuration and Management (SQLAlchemy)

Handles database setup and the alert recipient store.
"""

import shutil
from pathlib import Path
from datetime import datetime
import logging
from sqlalchemy import create_engine, select, delete
from sqlalchemy.orm import sessionmaker
from config.models import Base, Recipient
from config.settings import Settings

logger = logging.getLogger(__name__)

BACKUP_DIR = Path(__file__).parent.parent / "backups"

engine = None
SessionLocal = None


def configure_database(database_url=None):
    """
    Bind the module-level engine and session factory.

    Args:
        database_url (str, optional): SQLAlchemy URL. Defaults to DATABASE_URL from settings.
    """
    global engine, SessionLocal

    if database_url is None:
        database_url = Settings.from_env().database_url

    if database_url.startswith("sqlite:///"):
        db_file = Path(database_url[len("sqlite:///"):])
        db_file.parent.mkdir(parents=True, exist_ok=True)

    if engine is not None:
        engine.dispose()

    engine = create_engine(database_url, echo=False)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    return engine


def get_db_session():
    """
    Get a new database session.

    Returns:
        sqlalchemy.orm.Session: Database session
    """
    if SessionLocal is None:
        configure_database()
    return SessionLocal()


def init_database(default_chat_id=None):
    """
    Create all tables and seed a default recipient if none exist.

    Args:
        default_chat_id (str, optional): Chat ID for the seeded "Default" recipient.
    """
    logger.info("Initializing database...")

    if engine is None:
        configure_database()

    Base.metadata.create_all(bind=engine)

    if not default_chat_id:
        return

    session = get_db_session()
    try:
        existing = session.execute(select(Recipient).limit(1)).scalar_one_or_none()
        if not existing:
            session.add(Recipient(name="Default", chat_id=default_chat_id, active=True))
            session.commit()
            logger.info("Seeded default alert recipient")
    except Exception as e:
        session.rollback()
        logger.error(f"Error seeding default recipient: {e}")
        raise
    finally:
        session.close()


def backup_database():
    """
    Create a backup of the SQLite database file.
    """
    if engine is None or engine.url.get_backend_name() != "sqlite":
        logger.warning("Backups are only supported for SQLite databases")
        return None

    db_path = Path(engine.url.database or "")
    if not db_path.exists():
        logger.warning("Database file does not exist, cannot create backup")
        return None

    BACKUP_DIR.mkdir(exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_path = BACKUP_DIR / f"monitor_backup_{timestamp}.db"

    try:
        shutil.copy2(db_path, backup_path)
        logger.info(f"Database backed up to: {backup_path}")
        return str(backup_path)
    except OSError as e:
        logger.error(f"Error creating backup: {e}")
        return None


def get_recipients():
    """
    Get all alert recipients in insertion order.
    Returns list of dictionaries.
    """
    session = get_db_session()
    try:
        stmt = select(Recipient).order_by(Recipient.recipient_id.asc())
        return [r.to_dict() for r in session.execute(stmt).scalars().all()]
    finally:
        session.close()


def get_active_chat_ids():
    """
    Chat IDs of recipients that should receive alerts.
    """
    return [
        r['chatId'] for r in get_recipients()
        if r['active'] and r['chatId'].strip()
    ]


def add_recipient(name, chat_id, active=True):
    """
    Add a new alert recipient.

    Returns:
        dict: The created recipient
    """
    session = get_db_session()
    try:
        recipient = Recipient(name=name.strip(), chat_id=chat_id.strip(), active=active)
        session.add(recipient)
        session.commit()
        logger.info(f"Added recipient: {recipient.name} (ID: {recipient.recipient_id})")
        return recipient.to_dict()
    except Exception as e:
        logger.error(f"Error adding recipient: {e}")
        session.rollback()
        raise
    finally:
        session.close()


def remove_recipient(recipient_id):
    """
    Delete a recipient. Returns True if a row was removed.
    """
    session = get_db_session()
    try:
        result = session.execute(delete(Recipient).where(Recipient.recipient_id == recipient_id))
        session.commit()
        if result.rowcount > 0:
            logger.info(f"Removed recipient {recipient_id}")
        return result.rowcount > 0
    except Exception as e:
        logger.error(f"Error removing recipient {recipient_id}: {e}")
        session.rollback()
        raise
    finally:
        session.close()


def toggle_recipient(recipient_id):
    """
    Flip a recipient's active flag.

    Returns:
        dict or None: The updated recipient, None if not found
    """
    session = get_db_session()
    try:
        recipient = session.get(Recipient, recipient_id)
        if recipient is None:
            return None
        recipient.active = not recipient.active
        session.commit()
        logger.info(f"Recipient {recipient_id} active={recipient.active}")
        return recipient.to_dict()
    except Exception as e:
        logger.error(f"Error toggling recipient {recipient_id}: {e}")
        session.rollback()
        raise
    finally:
        session.close()
