"""Game records shared by the test modules."""

GIUOCO_PIANO = "1. e4 e5 2. Nf3 Nc6 3. Bc4 Bc5 *"

ITALIAN = [
    "1. e4 e5 2. Nf3 Nc6 3. Bc4 Bc5 4. c3 Nf6 5. d4 exd4 6. cxd4 *",
    "1. e4 e5 2. Nf3 Nc6 3. Bc4 Bc5 4. c3 Nf6 5. d4 exd4 6. e5 *",
    "1. e4 e5 2. Nf3 Nc6 3. Bc4 Bc5 4. c3 Nf6 5. d3 *",
]

SCANDINAVIAN = "1. e4 d5 2. exd5 Qxd5 3. Nc3 Qd8 *"

FOOLS_MATE = "1. f3 e5 2. g4 Qh4# *"

AFTER_D4 = """[SetUp "1"]
[FEN "rnbqkbnr/pppppppp/8/8/3P4/8/PPP1PPPP/RNBQKBNR b KQkq d3 0 1"]

1... d5 *"""

PROMOTION_FEN = "8/4P3/8/8/8/8/k7/4K3 w - - 0 1"

PROMOTION_QUEEN = f"""[SetUp "1"]
[FEN "{PROMOTION_FEN}"]

1. e8=Q *"""

PROMOTION_KNIGHT = f"""[SetUp "1"]
[FEN "{PROMOTION_FEN}"]

1. e8=N *"""
