"""Module entrypoint for ``python -m livepager``.

All argument parsing and runtime setup happen in ``livepager.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
