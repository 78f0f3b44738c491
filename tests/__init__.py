from pathlib import Path
import sys

# lets `python -m unittest` find pumpfun_api from a source checkout
SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.append(str(SRC))
