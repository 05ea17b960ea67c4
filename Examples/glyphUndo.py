from dataclasses import dataclass, field
from resettable import History
from resettable.debugging import dump


@dataclass
class Point:

    x: float
    y: float
    type: str = "line"
    smooth: bool = False


@dataclass
class Glyph:

    width: float = 0
    contours: list = field(default_factory=list)
    selected: bool = False

    def drawPoints(self, pen):
        for c in self.contours:
            pen.beginPath()
            for pt in c:
                pen.addPoint((pt.x, pt.y), pt.type, pt.smooth)
            pen.endPath()


class RecordingPen:

    def __init__(self):
        self.paths = []

    def beginPath(self):
        self.paths.append([])

    def addPoint(self, pt, segmentType, smooth):
        self.paths[-1].append(pt)

    def endPath(self):
        pass


def drawGlyph(g):
    pen = RecordingPen()
    g.drawPoints(pen)
    return pen.paths


if __name__ == "__main__":
    history = History(Glyph(width=200))
    glyph = history.value
    history.proxy.contours.append([], title="add a contour")
    for x, y in [(100, 100), (100, 200), (200, 200), (200, 100)]:
        history.proxy.contours[-1].append(Point(x, y), operation="inject")

    # The points were injected into the "add a contour" step
    assert history.stepCount() == 1
    assert len(glyph.contours) == 1
    assert len(glyph.contours[0]) == 4
    history.undo()
    assert glyph.contours == []
    history.redo()
    assert len(glyph.contours[0]) == 4

    history.proxy.contours.append([], title="add another contour")
    history.proxy.contours[-1].append(Point(100, 300), title="add point")
    history.proxy.contours[-1].append(Point(100, 400), title="add point")
    history.proxy.contours[-1].append(Point(200, 400), title="add point")
    history.proxy.contours[-1].append(Point(200, 300), title="add point")
    assert len(glyph.contours[1]) == 4

    history.undo()
    assert len(glyph.contours[1]) == 3
    history.redo()
    assert len(glyph.contours[1]) == 4

    # Dragging a point: every intermediate position amends the drag step.
    # An amendment replaces the change made by the step, so each one sets
    # the complete point.
    point = history.proxy.contours[1][2]
    point.set(Point(210, 410), title="move point")
    for delta in range(20, 31, 5):
        point.set(Point(200 + delta, 400 + delta), operation="amend")
    assert glyph.contours[1][2] == Point(230, 430)
    assert history.stepCount() == 7
    assert history.undoInfo() == {"title": "move point"}

    history.undo()
    assert glyph.contours[1][2] == Point(200, 400)
    history.redo()
    assert glyph.contours[1][2] == Point(230, 430)
    history.undo()

    # Inserting a step keeps the steps that can be redone
    history.proxy.width.set(300, operation="insert", title="change width")
    assert glyph.width == 300
    assert history.redoInfo() == {"title": "move point"}
    history.redo()
    assert glyph.contours[1][2] == Point(230, 430)
    assert glyph.width == 300

    history.undo(2)
    assert glyph.width == 200
    assert glyph.contours[1][2] == Point(200, 400)

    history.proxy.contours[1].insert(Point(150, 430), 2, title="insert point")
    assert glyph.contours[1][2] == Point(150, 430)
    assert len(glyph.contours[1]) == 5
    assert not history.canRedo()

    history.undo()
    assert len(glyph.contours[1]) == 4
    assert drawGlyph(glyph)[1] == [(100, 300), (100, 400), (200, 400), (200, 300)]

    print(dump(history))
