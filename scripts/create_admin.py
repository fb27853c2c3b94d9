"""
Create the first admin account.

Usage: python -m scripts.create_admin "Name" admin@example.com password
"""
import sys

from database import get_db_context, init_db
from services import ConflictError, create_user


def main(argv: list[str]) -> int:
    if len(argv) != 3:
        print(__doc__.strip())
        return 2

    name, email, password = argv
    init_db()
    with get_db_context() as db:
        try:
            user = create_user(db, name=name, email=email, password=password, role="admin")
        except ConflictError as e:
            print(e.message)
            return 1
    print("Created", user)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
