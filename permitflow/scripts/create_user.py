"""
Create a user (e.g. the first admin). Run from project root:
  python -m permitflow.scripts.create_user NATIONAL_ID USERNAME PASSWORD NAME [role]
Example:
  python -m permitflow.scripts.create_user 3171000000000001 admin 'your-secure-password' 'System Admin' Admin
"""
import argparse
import logging
import sys

from pydantic import ValidationError as PydanticValidationError

from permitflow.core.database import session_scope
from permitflow.models import Role
from permitflow.schemas.user import UserCreate
from permitflow.services.errors import ConflictError
from permitflow.services.users import create_user

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S%z",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a PermitFlow user.")
    parser.add_argument("national_id", help="National identity number (NIK)")
    parser.add_argument("username", help="Username (1-255 chars)")
    parser.add_argument("password", help="Password")
    parser.add_argument("name", help="Display name")
    parser.add_argument(
        "role",
        nargs="?",
        default=Role.ADMIN.value,
        choices=[r.value for r in Role],
    )
    args = parser.parse_args(argv)

    try:
        body = UserCreate(
            national_id=args.national_id,
            username=args.username,
            password=args.password,
            name=args.name,
            role=Role(args.role),
        )
    except PydanticValidationError as e:
        for err in e.errors(include_url=False):
            field = ".".join(str(p) for p in err["loc"])
            print(f"{field}: {err['msg']}", file=sys.stderr)
        return 1

    with session_scope() as db:
        try:
            user = create_user(db, body)
        except ConflictError as e:
            print(e.message, file=sys.stderr)
            return 1
        logger.info("Created user '%s' (id=%s) with role '%s'.", user.username, user.id, user.role.value)
    return 0


if __name__ == "__main__":
    sys.exit(main())
