"""Hello World -- the simplest collate example.

Define a parameterized block from a string and render it with different
arguments. No source directory needed.

Run:
    python app.py
"""

from collate import Library

library = Library()

library.import_string(
    """\
^|n greet|
^|p name|
Hello, ^|u #name|!
^|e|
"""
)

# Render with a literal argument
output = library.render("greet", ["World"])


def main() -> None:
    print(output)
    print()

    # Multiple renders with different arguments
    for name in ["Collate", "Blocks", "Python"]:
        print(library.render("greet", [name]))


if __name__ == "__main__":
    main()
