# coding: utf-8
from typing import List, NamedTuple

from typing_extensions import TypedDict, NotRequired


class Point(NamedTuple):
    x: int
    y: int


class ContourVertex(TypedDict):
    x: int
    y: int


class ObjectContourInfo(TypedDict):
    id: int
    offset: Point
    area: int
    contour: List[Point]
    corners: List[Point]
    vertices: List[ContourVertex]
    sides: NotRequired[List[List[Point]]]
