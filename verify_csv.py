# verify_csv.py
from dataclasses import dataclass, field

from config import Config
from utils.csv_utils import read_data_rows, count_lines


@dataclass
class ValidationReport:
    duplicates: list[str] = field(default_factory=list)
    integrity_errors: int = 0

    @property
    def ok(self) -> bool:
        return not self.duplicates and self.integrity_errors == 0


def extract_user_ids_from_csv(csv_file: str) -> list[str]:
    # tomme id'er fanges af integritetstjekket, ikke her
    ids = [row[0].strip() for _, row in read_data_rows(csv_file) if row and row[0].strip()]
    return sorted(ids)


def find_duplicate_user_ids(active_ids: list[str], inactive_ids: list[str]) -> list[str]:
    return sorted(set(active_ids) & set(inactive_ids))


def check_for_duplicate_users(config: Config) -> list[str]:
    active_ids = extract_user_ids_from_csv(config.active_users_file)
    inactive_ids = extract_user_ids_from_csv(config.inactive_users_file)
    duplicates = find_duplicate_user_ids(active_ids, inactive_ids)

    if not duplicates:
        print("Checking for duplicate users: ✓ No users appear in both files")
    else:
        print(f"Checking for duplicate users: ✗ WARNING: Found users in both files: {' '.join(duplicates)}")
    return duplicates


def validate_csv_row(csv_file: str, row: list[str], line_number: int | None = None) -> list[str]:
    user_id = row[0].strip() if len(row) > 0 else ""
    username = row[1].strip() if len(row) > 1 else ""
    where = f"{csv_file} (line {line_number})" if line_number else csv_file

    errors = []
    if not user_id:
        errors.append(f"✗ ERROR: Empty ID found in {where}")
    if not username:
        errors.append(f"✗ ERROR: Empty username found in {where}")
    return errors


def verify_csv_data_integrity(config: Config) -> int:
    total_errors = 0
    for csv_file in config.output_files:
        for line_number, row in read_data_rows(csv_file):
            for error in validate_csv_row(csv_file, row, line_number):
                print(error)
                total_errors += 1

    if total_errors == 0:
        print("Verifying data integrity: ✓ All required fields are present")
    else:
        print(f"Verifying data integrity: ✗ Found {total_errors} integrity errors")
    return total_errors


def get_line_count(csv_file: str) -> int:
    return count_lines(csv_file)


def display_results(config: Config) -> None:
    print("Done!")
    print("Results:")
    for csv_file in config.output_files:
        print(f"  {get_line_count(csv_file)} lines in {csv_file}")


def run_validation_checks(config: Config) -> ValidationReport:
    """Tjek efter kørslen. Rapporterer kun - intet bliver rullet tilbage."""
    print("")
    print("Running validation checks...")
    duplicates = check_for_duplicate_users(config)
    integrity_errors = verify_csv_data_integrity(config)
    return ValidationReport(duplicates=duplicates, integrity_errors=integrity_errors)
