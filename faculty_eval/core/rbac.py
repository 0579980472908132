from fastapi import Depends, HTTPException, status

from faculty_eval.core.security import get_current_user
from faculty_eval.models.user import User


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have permission to perform this action",
        )
    return user
