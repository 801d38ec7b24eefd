import pytest

from obdart.obdart_classifier import SplitResult, classify, has_entry_point
from obdart.obdart_config import DartConfig
from obdart.obdart_wrapper import IDENTITY_TEMPLATE, PRELUDE_IMPORTS, WRAPPER_IMPORTS, WRAPPER_TEMPLATE

ENTRY_POINT_SNIPPETS = [
    ("plain_main", "main() {\n  print('hi');\n}\n"),
    ("void_main", "void main() {\n  print('hi');\n}\n"),
    ("main_with_args", "void main(List<String> args) {\n  print(args);\n}\n"),
    ("future_main", "Future<void> main() async {\n  await Future.delayed(Duration.zero);\n}\n"),
    ("indented", "   void main() {}\n"),
    ("arrow_body", "void main() => print('hi');\n"),
    ("brace_next_line", "void main()\n{\n  print('x');\n}\n"),
    ("after_imports", "import 'dart:math';\n\nvoid main() {\n  print(pi);\n}\n"),
    ("after_helpers", "int twice(int x) => x * 2;\n\nvoid main() {\n  print(twice(21));\n}\n"),
]

BODY_SNIPPETS = [
    ("print_only", "print('hi');"),
    ("return_only", "return 42;"),
    ("call_to_main", "main();\n"),
    ("other_function", "void mainly() {}\nreturn 1;"),
    ("method_call", "foo.main();"),
    ("empty", ""),
]


@pytest.mark.parametrize("test_id, snippet", ENTRY_POINT_SNIPPETS, ids=[t[0] for t in ENTRY_POINT_SNIPPETS])
def test_entry_point_snippet_is_used_verbatim(test_id, snippet):
    split = classify(snippet)
    assert split == SplitResult(IDENTITY_TEMPLATE, PRELUDE_IMPORTS, snippet)
    assert split.main == snippet
    assert not split.is_wrapped


@pytest.mark.parametrize("test_id, snippet", BODY_SNIPPETS, ids=[t[0] for t in BODY_SNIPPETS])
def test_body_snippet_gets_wrapper(test_id, snippet):
    split = classify(snippet)
    assert split.wrapper == WRAPPER_TEMPLATE
    assert split.top == WRAPPER_IMPORTS
    assert split.main == snippet
    assert split.is_wrapped


def test_signature_inside_string_is_still_detected():
    # Textual scan, not a parse
    snippet = "var s = '''\nvoid main() {\n''';\nreturn s;"
    assert has_entry_point(snippet)
    assert classify(snippet).wrapper == IDENTITY_TEMPLATE


def test_classify_uses_configured_fragments():
    cfg = DartConfig(wrapper_template="// wrapped\n%s\n", wrapper_imports="// imports\n",
                     prelude_imports="// prelude\n")
    assert classify("return 1;", cfg) == SplitResult("// wrapped\n%s\n", "// imports\n", "return 1;")
    assert classify("void main() {}", cfg).top == "// prelude\n"
