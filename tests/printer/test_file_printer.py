from cardapio.printer.file import FilePrinter


class TestFilePrinter:
    def test_write_creates_file(self, tmp_path):
        printer = FilePrinter(str(tmp_path / "receipts.bin"))
        printer.write(b"\x1b@hello")
        assert (tmp_path / "receipts.bin").read_bytes() == b"\x1b@hello"

    def test_write_appends(self, tmp_path):
        printer = FilePrinter(str(tmp_path / "receipts.bin"))
        printer.write(b"part-1")
        printer.write(b"part-2")
        assert (tmp_path / "receipts.bin").read_bytes() == b"part-1part-2"

    def test_creates_parent_dir(self, tmp_path):
        FilePrinter(str(tmp_path / "spool" / "nested" / "receipts.bin"))
        assert (tmp_path / "spool" / "nested").is_dir()
