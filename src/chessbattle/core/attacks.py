"""Attack detection and the precomputed step/ray tables it shares with the generator."""

from __future__ import annotations

from chessbattle.core.board import Board
from chessbattle.core.enums import Color, PieceType
from chessbattle.core.types import Square, is_valid_coords, make_square

KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS


# -- Precomputed lookup tables ---------------------------------------------


def _build_targets(
    offsets: tuple[tuple[int, int], ...],
) -> tuple[tuple[Square, ...], ...]:
    targets: list[tuple[Square, ...]] = []
    for sq in range(64):
        file_idx = sq & 7
        rank_idx = sq >> 3
        targets.append(
            tuple(
                make_square(file_idx + df, rank_idx + dr)
                for df, dr in offsets
                if is_valid_coords(file_idx + df, rank_idx + dr)
            )
        )
    return tuple(targets)


def _build_rays(
    directions: tuple[tuple[int, int], ...],
) -> tuple[tuple[tuple[Square, ...], ...], ...]:
    rays_per_square: list[tuple[tuple[Square, ...], ...]] = []
    for sq in range(64):
        square_rays: list[tuple[Square, ...]] = []
        for df, dr in directions:
            af = (sq & 7) + df
            ar = (sq >> 3) + dr
            ray: list[Square] = []
            while is_valid_coords(af, ar):
                ray.append(make_square(af, ar))
                af += df
                ar += dr
            square_rays.append(tuple(ray))
        rays_per_square.append(tuple(square_rays))
    return tuple(rays_per_square)


def _build_pawn_sources() -> tuple[tuple[tuple[Square, ...], ...], ...]:
    # [attacker color][target square] -> squares a pawn of that color
    # would capture from. White pawns capture upward, so they sit one rank below.
    per_color: list[tuple[tuple[Square, ...], ...]] = []
    for rank_step in (-1, 1):
        per_color.append(
            tuple(
                tuple(
                    make_square((sq & 7) + df, (sq >> 3) + rank_step)
                    for df in (-1, 1)
                    if is_valid_coords((sq & 7) + df, (sq >> 3) + rank_step)
                )
                for sq in range(64)
            )
        )
    return tuple(per_color)


KNIGHT_TARGETS = _build_targets(KNIGHT_OFFSETS)
KING_TARGETS = _build_targets(KING_OFFSETS)
BISHOP_RAYS = _build_rays(BISHOP_DIRS)
ROOK_RAYS = _build_rays(ROOK_DIRS)
QUEEN_RAYS = _build_rays(QUEEN_DIRS)
PAWN_SOURCES = _build_pawn_sources()

_DIAGONAL_ATTACKERS = (PieceType.BISHOP, PieceType.QUEEN)
_ORTHOGONAL_ATTACKERS = (PieceType.ROOK, PieceType.QUEEN)


# -- Public API -------------------------------------------------------------


def is_square_attacked(board: Board, sq: Square, by_color: Color) -> bool:
    """Could any piece of *by_color* capture on *sq*?

    Whose turn it is and pins against the attacker's own king are ignored.
    Lookups run outward from *sq*.
    """
    for from_sq in KNIGHT_TARGETS[sq]:
        piece = board[from_sq]
        if (
            piece is not None
            and piece.color == by_color
            and piece.piece_type == PieceType.KNIGHT
        ):
            return True

    for from_sq in KING_TARGETS[sq]:
        piece = board[from_sq]
        if (
            piece is not None
            and piece.color == by_color
            and piece.piece_type == PieceType.KING
        ):
            return True

    if _ray_hits(board, ROOK_RAYS[sq], by_color, _ORTHOGONAL_ATTACKERS):
        return True
    if _ray_hits(board, BISHOP_RAYS[sq], by_color, _DIAGONAL_ATTACKERS):
        return True

    for from_sq in PAWN_SOURCES[int(by_color)][sq]:
        piece = board[from_sq]
        if (
            piece is not None
            and piece.color == by_color
            and piece.piece_type == PieceType.PAWN
        ):
            return True

    return False


def is_king_in_check(board: Board, color: Color) -> bool:
    """Is *color*'s king attacked by the opponent?

    A side without a king is never in check.
    """
    king_sq = board.king_square(color)
    if king_sq is None:
        return False
    return is_square_attacked(board, king_sq, color.opposite)


def _ray_hits(
    board: Board,
    rays: tuple[tuple[Square, ...], ...],
    by_color: Color,
    attackers: tuple[PieceType, ...],
) -> bool:
    for ray in rays:
        for to_sq in ray:
            piece = board[to_sq]
            if piece is None:
                continue
            if piece.color == by_color and piece.piece_type in attackers:
                return True
            break
    return False
