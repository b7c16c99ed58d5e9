import argparse
import os
import sys

from dotenv import load_dotenv

from app.application import Application

# Load environment variables
load_dotenv()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Look up a localized string from the translation table")
    parser.add_argument('--language', help="Language name, header text or fixed column id")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument('--row', type=int, help="Table row index")
    target.add_argument('--key', help="Text key from the first column")
    parser.add_argument('--args', nargs='*', default=[], help="Positional values for {...} placeholders")
    parser.add_argument('--csv', help="Translation table path, relative to the current directory (overrides table_cache.csv_path)")
    return parser


def run(argv=None) -> int:
    options = build_parser().parse_args(argv)

    with Application() as app:
        localization = app.get_service('localization_service')
        if localization is None:
            return 1

        if options.csv:
            app.get_utility('table_cache').ensure_fresh(os.path.abspath(options.csv))

        if options.language is not None:
            language = int(options.language) if options.language.isdigit() else options.language
            if not localization.change_language(language):
                return 1

        if options.key is not None:
            text = localization.replace_placeholders_by_key(options.key, *options.args)
        else:
            text = localization.replace_placeholders(options.row, *options.args)

    if not text:
        return 1

    print(text)
    return 0


if __name__ == "__main__":
    sys.exit(run())
