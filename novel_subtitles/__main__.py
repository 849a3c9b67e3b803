"""Package entry point for ``python -m novel_subtitles``.

WHY: Users run the generator as ``python -m novel_subtitles job.json``.
Python's ``-m`` flag looks for ``__main__.py`` inside the package and
executes it.

RULES:
- Delegates to the CLI's main() function
"""

from novel_subtitles.cli import main

if __name__ == "__main__":
    main()
