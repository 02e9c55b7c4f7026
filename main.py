from __future__ import annotations
from tileworld.editor.app import main


if __name__ == "__main__":
    main()
