from courier.middleware.authentication import current_user_id, session_required

__all__ = ["current_user_id", "session_required"]
