"""Terminal display for 本将棋."""

from __future__ import annotations

from shogi_engine.game.board import Board, Piece
from shogi_engine.game.moves import Move
from shogi_engine.game.types import COLS, HAND_PIECE_TYPES, ROWS, PieceType, Player

# Display characters for pieces
PIECE_CHARS: dict[PieceType, str] = {
    PieceType.KING: "玉",
    PieceType.ROOK: "飛",
    PieceType.BISHOP: "角",
    PieceType.GOLD: "金",
    PieceType.SILVER: "銀",
    PieceType.KNIGHT: "桂",
    PieceType.LANCE: "香",
    PieceType.PAWN: "歩",
}

PROMOTED_PIECE_CHARS: dict[PieceType, str] = {
    PieceType.ROOK: "龍",
    PieceType.BISHOP: "馬",
    PieceType.SILVER: "全",
    PieceType.KNIGHT: "圭",
    PieceType.LANCE: "杏",
    PieceType.PAWN: "と",
}

_ROW_LABELS = ["一", "二", "三", "四", "五", "六", "七", "八", "九"]


def piece_char(piece: Piece) -> str:
    if piece.promoted:
        return PROMOTED_PIECE_CHARS[piece.piece_type]
    return PIECE_CHARS[piece.piece_type]


def format_board(board: Board) -> str:
    """Format the board for terminal display."""
    lines: list[str] = []

    lines.append(f"後手持駒: {_format_hand(board, Player.SECOND)}")
    lines.append("  ９ ８ ７ ６ ５ ４ ３ ２ １")
    lines.append("+--+--+--+--+--+--+--+--+--+")

    for r in range(ROWS):
        row_str = "|"
        for c in range(COLS):
            piece = board.piece_at(r, c)
            if piece is None:
                row_str += "  |"
            elif piece.owner == Player.SECOND:
                row_str += f"v{piece_char(piece)}|"
            else:
                row_str += f" {piece_char(piece)}|"
        lines.append(f"{row_str} {_ROW_LABELS[r]}")
        lines.append("+--+--+--+--+--+--+--+--+--+")

    lines.append(f"先手持駒: {_format_hand(board, Player.FIRST)}")

    return "\n".join(lines)


def format_move(move: Move) -> str:
    """Format a move as 筋段 notation, e.g. "７六歩" or "５五角打".

    列0が9筋、行0が一段目。
    """
    if move.resign:
        return "投了"
    assert move.piece_type is not None
    square = f"{_file_label(move.to_col)}{_ROW_LABELS[move.to_row]}"
    name = PIECE_CHARS[move.piece_type]
    if move.is_drop:
        return f"{square}{name}打"
    origin = f"({COLS - move.from_col}{move.from_row + 1})"
    return f"{square}{name}{'成' if move.promotion else ''}{origin}"


def _file_label(col: int) -> str:
    return "９８７６５４３２１"[col]


def _format_hand(board: Board, player: Player) -> str:
    hand = board.hands[player]
    if not hand:
        return "なし"
    pieces: list[str] = []
    for pt in HAND_PIECE_TYPES:
        count = hand.get(pt, 0)
        if count == 0:
            continue
        char = PIECE_CHARS[pt]
        pieces.append(char if count == 1 else f"{char}{count}")
    return " ".join(pieces)
