import json
import shlex
import sys

import pytest

from obdart.obdart_config import DartConfig

# Stands in for `dart <file> <mode>`. It imitates just enough of the real
# toolchain for the pipeline: quoted print() calls in output mode, the first
# `return` expression in value mode, and the wrapper's dispatch failure.
FAKE_DART = r'''
import json, os, re, sys

args = sys.argv[1:]
path = args[0]
mode = args[1] if len(args) > 1 else None
with open(path, encoding="utf-8") as f:
    program = f.read()

log = os.environ.get("FAKE_DART_LOG")
if log:
    with open(log, "a", encoding="utf-8") as f:
        f.write(json.dumps({"argv": args, "path": path, "mode": mode, "program": program}) + "\n")

if "COMPILE_ERROR" in program:
    sys.stderr.write(path + ":3:1: Error: Expected ';' after this.\n")
    sys.exit(254)

wrapped = "class _BabelBlock" in program
if wrapped and mode not in ("output", "value"):
    sys.stderr.write('obdart: unrecognized result mode: %s (expected "output" or "value")\n' % mode)
    sys.exit(2)

if mode == "value" and wrapped:
    m = re.search(r"return (.*?);", program)
    print(m.group(1) if m else "null")
else:
    for text in re.findall(r"print\('([^']*)'\);", program):
        print(text)
'''


class FakeDart:
    def __init__(self, config, log_path, scratch_dir):
        self.config = config
        self.log_path = log_path
        self.scratch_dir = scratch_dir

    def calls(self):
        if not self.log_path.exists():
            return []
        with open(self.log_path, encoding="utf-8") as f:
            return [json.loads(line) for line in f if line.strip()]

    def scratch_files(self):
        return sorted(p.name for p in self.scratch_dir.iterdir())


@pytest.fixture
def fake_dart(tmp_path, monkeypatch):
    script = tmp_path / "fake_dart.py"
    script.write_text(FAKE_DART, encoding="utf-8")
    log_path = tmp_path / "calls.jsonl"
    monkeypatch.setenv("FAKE_DART_LOG", str(log_path))
    scratch = tmp_path / "scratch"
    scratch.mkdir()
    command = f"{shlex.quote(sys.executable)} {shlex.quote(str(script))}"
    config = DartConfig(command=command, scratch_dir=str(scratch))
    return FakeDart(config, log_path, scratch)
