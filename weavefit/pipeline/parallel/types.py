# weavefit/pipeline/parallel/types.py
from enum import Enum


class ParallelKind(str, Enum):
    CV_CELL = "cv_cell"
