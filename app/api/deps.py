from datetime import date

from app.db import SessionLocal


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_today() -> date:
    """
    The current date for lease status and progress calculations.

    This is the only place the wall clock is read; everything below it takes
    the date as an argument. Tests override this dependency to pin the clock.
    """
    return date.today()
