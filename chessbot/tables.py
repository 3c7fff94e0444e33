"""
Compressed PeSTO-style piece-square tables and their one-time decode.

The evaluation data is stored as 99 unsigned 64-bit words. Laid out as
little-endian bytes they form a single 792-byte blob:

    bytes   0..383   midgame PST, 6 pieces x 64 squares (pawn..king)
    bytes 384..767   endgame PST, same layout
    bytes 768..773   phase weight per piece type
    bytes 776..781   midgame offset per piece type
    bytes 782..787   endgame offset per piece type

PST rows are written from White's point of view with index 0 = a8, so a White
piece on python-chess square ``sq`` reads index ``sq ^ 56``.

Every value is an unsigned byte; the piece base value (``47 << piece``) and
the per-piece offsets shift them into the centipawn range. The blob is data,
not logic: it is decoded exactly once, at import, into ``TABLES``.
"""

from dataclasses import dataclass

# Byte offsets into the decoded blob.
MG_PST_OFFSET: int = 0
EG_PST_OFFSET: int = 384
PHASE_WEIGHT_OFFSET: int = 768
MG_PIECE_OFFSET: int = 776
EG_PIECE_OFFSET: int = 782
_BLOB_MIN_SIZE: int = EG_PIECE_OFFSET + 6

PACKED_PST_WORDS: tuple[int, ...] = (
    2531906049332683555, 1748981496244382085, 1097852895337720349, 879379754340921365,
    733287618436800776, 1676506906360749833, 957361353080644096, 2531906049332683555,
    1400370699429487872, 7891921272903718197, 12306085787436563023, 10705271422119415669,
    8544333011004326513, 7968995920879187303, 7741846628066281825, 7452158230270339349,
    5357357457767159349, 2550318802336244280, 5798248685363885890, 5789790151167530830,
    6222952639246589772, 6657566409878495570, 6013263560801673558, 4407693923506736945,
    8243364706457710951, 8314078770487191394, 6306293301333023298, 3692787177354050607,
    3480508800547106083, 2756844305966902810, 18386335130924827, 3252248017965169204,
    6871752429727068694, 7516062622759586586, 7737582523311005989, 3688521973121554199,
    3401675877915367465, 3981239439281566756, 3688238338080057871, 5375663681380401,
    5639385282757351424, 2601740525735067742, 3123043126030326072, 2104069582342139184,
    1017836687573008400, 2752300895699678003, 5281087483624900674, 5717642197576017202,
    578721382704613384, 14100080608108000698, 6654698745744944230, 1808489945494790184,
    507499387321389333, 1973657882726156, 74881230395412501, 578721382704613384,
    10212557253393705, 3407899295075687242, 4201957831109070667, 5866904407588300370,
    5865785079031356753, 5570777287267344460, 3984647049929379641, 2535897457754910790,
    219007409309353485, 943238143453304595, 2241421631242834717, 2098155335031661592,
    1303832920857255445, 870353785759930383, 3397624511334669, 726780562173596164,
    1809356472696839713, 1665231324524388639, 1229220018493528859, 1590638277979871000,
    651911504053672215, 291616928119591952, 1227524515678129678, 6763160767239691,
    4554615069702439202, 3119099418927382298, 3764532488529260823, 5720789117110010158,
    4778967136330467097, 3473748882448060443, 794625965904696341, 150601370378243850,
    4129336036406339328, 6152322103641660222, 6302355975661771604, 5576700317533364290,
    4563097935526446648, 4706642459836630839, 4126790774883761967, 2247925333337909269,
    17213489408, 6352120424995714304, 982348882,
)


@dataclass(frozen=True)
class EvaluationTables:
    """
    Decoded evaluation data. Immutable after decode.

    Attributes:
        mg_pst:        384 midgame values, indexed ``64 * piece + square``.
        eg_pst:        384 endgame values, same indexing.
        phase_weights: Phase contribution per piece (pawn..king).
        mg_offsets:    Midgame positional offset per piece.
        eg_offsets:    Endgame positional offset per piece.
    """

    mg_pst: tuple[int, ...]
    eg_pst: tuple[int, ...]
    phase_weights: tuple[int, ...]
    mg_offsets: tuple[int, ...]
    eg_offsets: tuple[int, ...]


def unpack_words(words: tuple[int, ...]) -> bytes:
    """Lay out 64-bit words as consecutive little-endian bytes."""
    return b"".join(word.to_bytes(8, "little") for word in words)


def decode_tables(words: tuple[int, ...] = PACKED_PST_WORDS) -> EvaluationTables:
    """
    Unpack the compressed word list into lookup tables.

    Raises:
        ValueError: if the blob is too short to hold every section.
    """
    data = unpack_words(words)
    if len(data) < _BLOB_MIN_SIZE:
        raise ValueError(
            f"packed PST blob has {len(data)} bytes, need at least {_BLOB_MIN_SIZE}"
        )

    return EvaluationTables(
        mg_pst=tuple(data[MG_PST_OFFSET:EG_PST_OFFSET]),
        eg_pst=tuple(data[EG_PST_OFFSET:PHASE_WEIGHT_OFFSET]),
        phase_weights=tuple(data[PHASE_WEIGHT_OFFSET:PHASE_WEIGHT_OFFSET + 6]),
        mg_offsets=tuple(data[MG_PIECE_OFFSET:MG_PIECE_OFFSET + 6]),
        eg_offsets=tuple(data[EG_PIECE_OFFSET:EG_PIECE_OFFSET + 6]),
    )


TABLES: EvaluationTables = decode_tables()
