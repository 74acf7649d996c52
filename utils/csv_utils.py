# utils/csv_utils.py
import csv


def read_data_rows(path: str):
    """Yield (linjenummer, række) for alle rækker efter headeren."""
    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.reader(f)
        next(reader, None)
        for row in reader:
            yield reader.line_num, row


def count_lines(path: str) -> int:
    with open(path, encoding="utf-8") as f:
        return sum(1 for _ in f)
