"""Generate an example .ckv file to see what the format looks like."""

from pathlib import Path

from ckv.document import CKVDocument

path = Path(__file__).parent / "hello.ckv"
path.unlink(missing_ok=True)

doc = CKVDocument(path)
doc.set_value("NAME", "hello-service")
doc.set_value("EDITOR", "vim")
doc.set_value("COMPILE", "g++ -O2 -Wall\n    -o hello\n    main.cpp")
doc.set_value("MOTD", """Welcome to the build box.

Blank lines inside a value are kept.
\tSo is indentation after the first tab.""")
doc.set_value("EMPTY", "")

# Hand-written '+' continuations read the same as tab lines
with path.open("a", encoding="utf-8") as f:
    f.write("LEGACY =\n\tfirst line\n+second line\n")

print(path.read_text(encoding="utf-8"))
print("Generated:", path)
print("LEGACY ->", repr(doc.get_value("LEGACY")))
print("Keys:", ", ".join(doc.import_all()))
