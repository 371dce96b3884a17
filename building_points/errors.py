"""
Exceptions raised by the extraction pipeline
"""


class DatasetError(RuntimeError):
    """A pass over the dataset could not be completed"""


class UnresolvedNodeError(LookupError):
    """A node referenced by a selected way has no resolved coordinate"""

    def __init__(self, node_id: int, way_id: int):
        super().__init__(f"Node {node_id} of way {way_id} was not resolved")
        self.node_id = node_id
        self.way_id = way_id
