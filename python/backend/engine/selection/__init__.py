from backend.engine.selection.selection import Evaluation, Selection, evaluate, selection_sum

__all__ = ["Evaluation", "Selection", "evaluate", "selection_sum"]
