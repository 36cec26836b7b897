"""Pool and edge data classes."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

NATIVE_TOKEN_ID = "ERG"

DEFAULT_FEE_NUM = 3
DEFAULT_FEE_DEN = 1000


class PoolKind(str, Enum):
    """Which assets a pool pairs."""
    N2T = "N2T"  # Native asset / token
    T2T = "T2T"  # Token / token


@dataclass(frozen=True)
class Pool:
    """Point-in-time snapshot of one constant product pool.

    For N2T pools ``token_x`` is the native asset id. The fee is
    ``fee_num / fee_den`` of the input (e.g. 3/1000 = 30bps).

    Zero reserves are accepted here; the pool graph drops such pools.
    """
    pool_id: str
    kind: PoolKind
    token_x: str
    reserves_x: int
    token_y: str
    reserves_y: int
    fee_num: int = DEFAULT_FEE_NUM
    fee_den: int = DEFAULT_FEE_DEN
    name_x: Optional[str] = None
    name_y: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.pool_id:
            raise ValueError("pool_id must not be empty")
        if not self.token_x or not self.token_y:
            raise ValueError(f"pool {self.pool_id}: token ids must not be empty")
        if self.token_x == self.token_y:
            raise ValueError(f"pool {self.pool_id}: token_x and token_y must differ")
        if self.reserves_x < 0 or self.reserves_y < 0:
            raise ValueError(
                f"pool {self.pool_id}: reserves must be >= 0, "
                f"got ({self.reserves_x}, {self.reserves_y})"
            )
        if self.fee_den <= 0:
            raise ValueError(f"pool {self.pool_id}: fee_den must be > 0, got {self.fee_den}")
        if not 0 <= self.fee_num < self.fee_den:
            raise ValueError(
                f"pool {self.pool_id}: fee_num must be in [0, {self.fee_den}), got {self.fee_num}"
            )

    @classmethod
    def native(
        cls,
        pool_id: str,
        native_reserves: int,
        token_id: str,
        token_reserves: int,
        fee_num: int = DEFAULT_FEE_NUM,
        fee_den: int = DEFAULT_FEE_DEN,
        token_name: Optional[str] = None,
        native_id: str = NATIVE_TOKEN_ID,
    ) -> "Pool":
        """Create a native-asset/token pool."""
        return cls(
            pool_id=pool_id,
            kind=PoolKind.N2T,
            token_x=native_id,
            reserves_x=native_reserves,
            token_y=token_id,
            reserves_y=token_reserves,
            fee_num=fee_num,
            fee_den=fee_den,
            name_x=native_id,
            name_y=token_name,
        )

    @classmethod
    def pair(
        cls,
        pool_id: str,
        token_x: str,
        reserves_x: int,
        token_y: str,
        reserves_y: int,
        fee_num: int = DEFAULT_FEE_NUM,
        fee_den: int = DEFAULT_FEE_DEN,
        name_x: Optional[str] = None,
        name_y: Optional[str] = None,
    ) -> "Pool":
        """Create a token/token pool."""
        return cls(
            pool_id=pool_id,
            kind=PoolKind.T2T,
            token_x=token_x,
            reserves_x=reserves_x,
            token_y=token_y,
            reserves_y=reserves_y,
            fee_num=fee_num,
            fee_den=fee_den,
            name_x=name_x,
            name_y=name_y,
        )

    def edges(self) -> tuple["Edge", "Edge"]:
        """Both directed traversals (x -> y, y -> x), sharing this pool's id."""
        forward = Edge(
            token_in=self.token_x,
            token_out=self.token_y,
            reserves_in=self.reserves_x,
            reserves_out=self.reserves_y,
            fee_num=self.fee_num,
            fee_den=self.fee_den,
            pool_id=self.pool_id,
            kind=self.kind,
            name_in=self.name_x,
            name_out=self.name_y,
        )
        backward = Edge(
            token_in=self.token_y,
            token_out=self.token_x,
            reserves_in=self.reserves_y,
            reserves_out=self.reserves_x,
            fee_num=self.fee_num,
            fee_den=self.fee_den,
            pool_id=self.pool_id,
            kind=self.kind,
            name_in=self.name_y,
            name_out=self.name_x,
        )
        return forward, backward


@dataclass(frozen=True)
class Edge:
    """One directed swap option through a pool, reserves oriented in -> out."""
    token_in: str
    token_out: str
    reserves_in: int
    reserves_out: int
    fee_num: int
    fee_den: int
    pool_id: str
    kind: PoolKind
    name_in: Optional[str] = None
    name_out: Optional[str] = None

    @property
    def label_in(self) -> str:
        return self.name_in or self.token_in[:8]

    @property
    def label_out(self) -> str:
        return self.name_out or self.token_out[:8]

    @property
    def display_name(self) -> str:
        """Pool label oriented to the traversal, e.g. "ERG/SigUSD"."""
        return f"{self.label_in}/{self.label_out}"


# An ordered sequence of edges, each starting where the previous one ended.
Path = tuple[Edge, ...]
