"""Error handling walkthrough.

Each operation below either succeeds or raises exactly one of the four
tensorutils errors; the comments name which.

Requirements:
    pip install tensorutils
"""

import numpy as np

from tensorutils import OutOfRange, RankMismatch, ShapeMismatch, Tensor, UnableToOpenFile


def attempt(label, fn):
    try:
        fn()
    except (ShapeMismatch, RankMismatch, OutOfRange, UnableToOpenFile) as exc:
        print(f"{label:<45} {type(exc).__name__}: {exc}")
    else:
        print(f"{label:<45} OK")


def example_reading_files():
    """Reading a missing file raises UnableToOpenFile."""
    print("=== Reading files ===")
    a = Tensor()
    attempt('a.read("my_tensor.txt")', lambda: a.read("my_tensor.txt"))
    print()


def example_accessing_components():
    """Too many indices is a shape error; a bad component is out of range."""
    print("=== Accessing components ===")
    a = Tensor((2, 3, 5, 7), fill=1.0)
    attempt("a(1, 2)", lambda: a(1, 2))
    attempt("a(0, 0, 0, 0, 0)", lambda: a(0, 0, 0, 0, 0))
    attempt("a(1, 2, 4, 7)", lambda: a(1, 2, 4, 7))
    print()


def example_operators():
    """Operators and member functions."""
    print("=== Operators and member functions ===")
    a = Tensor((2, 3, 5, 7), fill=1.0)
    b = Tensor((2, 3, 5, 8), fill=1.0)
    c = Tensor((2 * 3, 5 * 7), fill=1.0, dtype=np.float32)
    d = Tensor((), fill=1.0, dtype=np.longdouble)
    e = Tensor((3, 5, 7), fill=1.0, dtype=np.int32, rank=3)
    f = Tensor((3, 5, 7), fill=1.0, dtype=np.uint64)

    def iadd(x, y):
        x += y

    attempt("a += b", lambda: iadd(a, b))
    attempt("a += c", lambda: iadd(a, c))
    attempt("e.copy_from(a)", lambda: e.copy_from(a))
    attempt("e.copy_from(f)", lambda: e.copy_from(f))
    attempt("a.copy_from(e)", lambda: a.copy_from(e))
    attempt("d[0]", lambda: d[0])
    attempt("e.alloc((2, 3, 5, 7))", lambda: e.alloc((2, 3, 5, 7)))

    a.alloc((2, 3, 5, 7), 1.0)
    attempt("a.assign(b, (1, 2), (1, 2))", lambda: a.assign(b, (1, 2), (1, 2)))
    attempt("a.assign(c, (1, 2), (0,))", lambda: a.assign(c, (1, 2), (0,)))
    attempt("a.assign(c, (1, 3), (0,))", lambda: a.assign(c, (1, 3), (0,)))

    attempt("f.transpose((0, 2, 1))", lambda: f.copy_from(f.transpose((0, 2, 1))))
    attempt("f.transpose((1, 3, 2))", lambda: f.transpose((1, 3, 2)))

    attempt("a.dot(a, (1, 2, 3), (1, 2, 3, 4))", lambda: a.dot(a, (1, 2, 3), (1, 2, 3, 4)))
    attempt(
        "a.dot(a, (1, 2, 3, 4), (5, 6, 7, 8), (0, 0, 0, 7))",
        lambda: a.dot(a, (1, 2, 3, 4), (5, 6, 7, 8), (0, 0, 0, 7)),
    )
    print()


if __name__ == "__main__":
    example_reading_files()
    example_accessing_components()
    example_operators()
