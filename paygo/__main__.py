from paygo.cli.app import main_menu
from paygo.db import initialize_db
from paygo.logging import configure_logging


def main() -> None:
    configure_logging()
    initialize_db()
    main_menu()


if __name__ == "__main__":
    main()
