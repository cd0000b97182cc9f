"""
ID mapping between graph node ids and NetworkIt node indices.

Node ids in a tabgraph graph are positive integers that may have gaps after
deletions (e.g. 1, 2, 5, 9), while NetworkIt requires consecutive indices
starting from 0. IDMapper translates in both directions so results computed
by NetworkIt can be keyed back to the node table.
"""

from typing import Dict, Iterable


class IDMapper:
    """
    Bidirectional mapping between graph node ids and NetworkIt indices.

    Attributes
    ----------
    original_to_internal : Dict[int, int]
        Maps node ids from the node table to NetworkIt indices (0, 1, 2, ...)
    internal_to_original : Dict[int, int]
        Maps NetworkIt indices back to node ids

    Examples
    --------
    >>> mapper = IDMapper.from_node_ids([1, 2, 5])
    >>> mapper.get_internal(5)
    2
    """

    def __init__(self) -> None:
        self.original_to_internal: Dict[int, int] = {}
        self.internal_to_original: Dict[int, int] = {}

    @classmethod
    def from_node_ids(cls, node_ids: Iterable[int]) -> 'IDMapper':
        """
        Build a mapper assigning consecutive indices in iteration order.

        Parameters
        ----------
        node_ids : Iterable[int]
            Node ids, usually the ``id`` column of a node table

        Returns
        -------
        IDMapper
            Mapper where the k-th id maps to index k
        """
        mapper = cls()
        for internal_id, node_id in enumerate(node_ids):
            mapper.add_mapping(int(node_id), internal_id)
        return mapper

    def get_internal(self, original_id: int) -> int:
        """
        Get the NetworkIt index for a node id.

        Raises
        ------
        KeyError
            If original_id is not found in the mapping
        """
        try:
            return self.original_to_internal[original_id]
        except KeyError:
            raise KeyError(f"Node ID '{original_id}' not found in mapping")

    def add_mapping(self, original_id: int, internal_id: int) -> None:
        """
        Add a new ID mapping pair.

        Parameters
        ----------
        original_id : int
            Node id from the node table
        internal_id : int
            NetworkIt index (must be non-negative)

        Raises
        ------
        ValueError
            If either id is already mapped, or internal_id is negative
        TypeError
            If internal_id is not an integer
        """
        if not isinstance(internal_id, int):
            raise TypeError(f"Internal ID must be integer, got {type(internal_id)}")

        if internal_id < 0:
            raise ValueError(f"Internal ID must be non-negative, got {internal_id}")

        if original_id in self.original_to_internal:
            existing_internal = self.original_to_internal[original_id]
            raise ValueError(
                f"Node ID '{original_id}' already mapped to internal ID {existing_internal}"
            )

        if internal_id in self.internal_to_original:
            existing_original = self.internal_to_original[internal_id]
            raise ValueError(
                f"Internal ID {internal_id} already mapped to node ID '{existing_original}'"
            )

        self.original_to_internal[original_id] = internal_id
        self.internal_to_original[internal_id] = original_id

    def __len__(self) -> int:
        return len(self.original_to_internal)

    def __repr__(self) -> str:
        return f"IDMapper(size={len(self)})"
