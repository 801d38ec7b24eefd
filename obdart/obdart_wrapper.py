"""
The Dart scaffold that wrapped snippets are embedded in.

This text is emitted, never executed by the host. Placeholders:

  %a  asynchronous marker (`async`)
  %w  suspend point (`await`)
  %s  the snippet body
  %%  a literal percent sign

Runtime contract of the emitted program:

- `dart <file> output` runs the snippet and lets its `print` calls reach
  stdout untouched.
- `dart <file> value` runs the snippet inside a zone whose `print` handler
  drops every line, waits for the snippet's future to settle, then prints
  the returned value once. Only that line reaches stdout.
- Any other argument (or none) is reported on stderr and the program exits
  with status 2.

Only `print` is intercepted. Direct `stdout.write` calls inside a value
block still reach the real stdout.
"""

IDENTITY_TEMPLATE = "%s"

# Printed by the wrapper on stderr when it does not know the mode it was given.
DISPATCH_ERROR_MARKER = "obdart: unrecognized result mode"

RESULT_MODES = ("output", "value")

WRAPPER_IMPORTS = """\
import 'dart:async';
import 'dart:io';

"""

# Prepended to snippets that bring their own `main`.
PRELUDE_IMPORTS = """\
import 'dart:async';
import 'dart:io';

"""

WRAPPER_TEMPLATE = """\
class _BabelBlock {
  Future<dynamic> run(Map<String, dynamic> vars) %a {
%s
  }
}

Future<void> _runOutput() %a {
  %w _BabelBlock().run(<String, dynamic>{});
}

Future<void> _runValue() %a {
  dynamic value;
  %w runZoned(() %a {
    value = %w _BabelBlock().run(<String, dynamic>{});
  }, zoneSpecification: ZoneSpecification(
      print: (Zone self, ZoneDelegate parent, Zone zone, String line) {}));
  print(value);
}

Future<void> main(List<String> args) %a {
  final mode = args.isEmpty ? null : args.first;
  switch (mode) {
    case 'output':
      %w _runOutput();
      break;
    case 'value':
      %w _runValue();
      break;
    default:
      stderr.writeln('obdart: unrecognized result mode: $mode (expected "output" or "value")');
      %w stderr.flush();
      exit(2);
  }
}
"""
