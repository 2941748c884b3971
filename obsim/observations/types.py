"""Observable types, link-end roles and link-end sets.

This module defines the identifiers shared by every stage of the
observation simulation pipeline:
    - ObservableType: the kind of measurement (range, Doppler, angles, ...)
    - OBSERVABLE_SIZES: the fixed number of scalar channels per observable
    - LinkEndType: the role a participant plays in a measurement
    - LinkEndId: the body (and optional station) filling a role
    - LinkEnds: the complete, ordered set of participants of one geometry

LinkEnds values are immutable, hashable and totally ordered so they can be
used as dictionary keys and sorted deterministically.

Author: Navigation Engineering Team
Date: October 2026
"""

from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from types import MappingProxyType
from typing import Iterator, Mapping, NamedTuple, Tuple, Union


class ObservableType(Enum):
    """Enumeration of simulated measurement kinds.

    Attributes:
        ONE_WAY_RANGE: Distance between transmitter and receiver (1 channel).
        ONE_WAY_DOPPLER: Range rate between transmitter and receiver (1 channel).
        ONE_WAY_DIFFERENCED_RANGE: Range difference over a count interval (1 channel).
        N_WAY_RANGE: Multi-leg range through one or more reflectors (1 channel).
        ANGULAR_POSITION: Right ascension and declination (2 channels).
        POSITION_OBSERVABLE: Cartesian position of a body (3 channels).
        VELOCITY_OBSERVABLE: Cartesian velocity of a body (3 channels).
    """

    ONE_WAY_RANGE = "one_way_range"
    ONE_WAY_DOPPLER = "one_way_doppler"
    ONE_WAY_DIFFERENCED_RANGE = "one_way_differenced_range"
    N_WAY_RANGE = "n_way_range"
    ANGULAR_POSITION = "angular_position"
    POSITION_OBSERVABLE = "position_observable"
    VELOCITY_OBSERVABLE = "velocity_observable"


# Read-only catalog: number of scalar channels per observable sample
OBSERVABLE_SIZES: Mapping[ObservableType, int] = MappingProxyType({
    ObservableType.ONE_WAY_RANGE: 1,
    ObservableType.ONE_WAY_DOPPLER: 1,
    ObservableType.ONE_WAY_DIFFERENCED_RANGE: 1,
    ObservableType.N_WAY_RANGE: 1,
    ObservableType.ANGULAR_POSITION: 2,
    ObservableType.POSITION_OBSERVABLE: 3,
    ObservableType.VELOCITY_OBSERVABLE: 3,
})


def get_observable_size(observable_type: ObservableType) -> int:
    """
    Look up the number of scalar channels of an observable.

    Args:
        observable_type: Observable to look up.

    Returns:
        Fixed dimensionality of one sample of this observable (1, 2 or 3).

    Raises:
        ValueError: If the observable is not in the catalog.

    Example:
        >>> get_observable_size(ObservableType.ANGULAR_POSITION)
        2
    """
    try:
        return OBSERVABLE_SIZES[observable_type]
    except KeyError:
        raise ValueError(
            f"No observation size defined for observable {observable_type!r}"
        ) from None


class LinkEndType(Enum):
    """Role of a participant within a measurement geometry.

    Integer values define the canonical order of roles inside a LinkEnds
    set (signal path order: transmitter, reflectors, receiver).
    """

    UNIDENTIFIED = -1
    TRANSMITTER = 0
    REFLECTOR1 = 1
    REFLECTOR2 = 2
    REFLECTOR3 = 3
    REFLECTOR4 = 4
    RECEIVER = 5
    OBSERVED_BODY = 6


class LinkEndId(NamedTuple):
    """Identifier of the participant filling a link-end role.

    Attributes:
        body: Name of the body (e.g., 'Earth', 'Mars', 'LRO').
        station: Optional reference point on the body (e.g., ground station).
    """

    body: str
    station: str = ""

    def __repr__(self) -> str:
        if self.station:
            return f"LinkEndId({self.body}:{self.station})"
        return f"LinkEndId({self.body})"


LinkEndIdLike = Union[LinkEndId, str, Tuple[str, str]]


def _as_link_end_id(value: LinkEndIdLike) -> LinkEndId:
    if isinstance(value, LinkEndId):
        return value
    if isinstance(value, str):
        return LinkEndId(value)
    if isinstance(value, tuple) and len(value) == 2:
        return LinkEndId(*value)
    raise TypeError(
        f"Link end id must be a LinkEndId, body name or (body, station) tuple, "
        f"got {value!r}"
    )


@total_ordering
@dataclass(frozen=True)
class LinkEnds:
    """
    Ordered set of participants defining one measurement geometry.

    Entries are stored as (LinkEndType, LinkEndId) pairs sorted by role, so
    two LinkEnds built from the same mapping in any order compare equal and
    hash identically.

    Attributes:
        ends: Tuple of (role, participant) pairs, one per role.

    Example:
        >>> link_ends = LinkEnds.from_dict({
        ...     LinkEndType.RECEIVER: ('Earth', 'DSS-63'),
        ...     LinkEndType.TRANSMITTER: 'Mars',
        ... })
        >>> link_ends.roles
        (<LinkEndType.TRANSMITTER: 0>, <LinkEndType.RECEIVER: 5>)
        >>> link_ends[LinkEndType.RECEIVER].station
        'DSS-63'
    """

    ends: Tuple[Tuple[LinkEndType, LinkEndId], ...]

    def __post_init__(self) -> None:
        """Normalize entries and validate roles."""
        normalized = []
        for item in self.ends:
            if not isinstance(item, tuple) or len(item) != 2:
                raise TypeError(f"Link end entry must be a (role, id) pair, got {item!r}")
            role, end_id = item
            if not isinstance(role, LinkEndType):
                raise TypeError(f"Link end role must be a LinkEndType, got {role!r}")
            normalized.append((role, _as_link_end_id(end_id)))

        if not normalized:
            raise ValueError("LinkEnds must contain at least one link end")

        roles = [role for role, _ in normalized]
        if len(set(roles)) != len(roles):
            raise ValueError(f"Duplicate link end roles in {roles}")

        normalized.sort(key=lambda item: item[0].value)
        object.__setattr__(self, "ends", tuple(normalized))

    @classmethod
    def from_dict(cls, mapping: Mapping[LinkEndType, LinkEndIdLike]) -> "LinkEnds":
        """Build LinkEnds from a role -> participant mapping."""
        return cls(tuple(mapping.items()))

    @property
    def roles(self) -> Tuple[LinkEndType, ...]:
        """Roles present in this geometry, in canonical order."""
        return tuple(role for role, _ in self.ends)

    def __getitem__(self, role: LinkEndType) -> LinkEndId:
        for current_role, end_id in self.ends:
            if current_role == role:
                return end_id
        raise KeyError(role)

    def __contains__(self, role: object) -> bool:
        return any(current_role == role for current_role, _ in self.ends)

    def __iter__(self) -> Iterator[LinkEndType]:
        return iter(self.roles)

    def __len__(self) -> int:
        return len(self.ends)

    def _sort_key(self) -> Tuple:
        return tuple((role.value, end_id.body, end_id.station) for role, end_id in self.ends)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, LinkEnds):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __repr__(self) -> str:
        entries = ", ".join(f"{role.name.lower()}={end_id!r}" for role, end_id in self.ends)
        return f"LinkEnds({entries})"
