"""Event shorthands shared by the canvas tests."""

from core.events import (
    KeyDown,
    Modifiers,
    PointerButtonDown,
    PointerButtonUp,
    PointerMoved,
)


def press(canvas, character):
    return canvas.dispatch(KeyDown(character))


def down(canvas, x, y, ctrl=False):
    return canvas.dispatch(PointerButtonDown((x, y), modifiers=Modifiers(ctrl=ctrl)))


def up(canvas, x, y):
    return canvas.dispatch(PointerButtonUp((x, y)))


def move(canvas, x, y):
    return canvas.dispatch(PointerMoved((x, y)))


def click(canvas, x, y, ctrl=False):
    down(canvas, x, y, ctrl)
    return up(canvas, x, y)
