"""Allow ``python -m message_sender``."""

from message_sender.app.cli import main

if __name__ == "__main__":
    main()
