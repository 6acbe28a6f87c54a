"""Database initialization script."""

from books_api.core.services import DbManageService, DbSessionService


def init_db(drop: bool = False) -> None:
    """Create all database tables, optionally dropping them first."""
    db_session_service = DbSessionService()
    try:
        db_manage_service = DbManageService(db_session_service.engine)
        if drop:
            db_manage_service.drop_all()
        db_manage_service.create_all()
    finally:
        db_session_service.dispose()


if __name__ == "__main__":
    init_db()
