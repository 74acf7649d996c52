import os
import sys
import argparse
import datetime
from dataclasses import replace

from google.cloud import storage

from config import Config
from build_activity_csv import initialize_csv_files, process_all_users
from verify_csv import display_results, run_validation_checks

# Cloud Functions må kun skrive i /tmp
WORK_DIR = "/tmp"


def run(config: Config):
    print(f"Starting user membership export from {config.host}")

    initialize_csv_files(config)
    summary = process_all_users(config)
    if summary.stopped_on_error:
        print(
            f"⚠️  Pagination stopped on an API error after {summary.pages_fetched} pages - results may be incomplete",
            file=sys.stderr,
        )
    display_results(config)
    report = run_validation_checks(config)
    return summary, report


def upload_files_to_bucket(config: Config, file_list):
    """Uploader rapporterne til Google Cloud Storage for historik"""
    if not config.bucket_name:
        print("Skipping upload: BUCKET_NAME env var is not set.")
        return []

    client = storage.Client()
    bucket = client.bucket(config.bucket_name)
    timestamp = datetime.datetime.now().strftime("%Y-%m-%d_%H-%M")

    print(f"Uploading reports to: gs://{config.bucket_name}/reports/{timestamp}/")

    uploaded = []
    for filename in file_list:
        if os.path.exists(filename):
            blob = bucket.blob(f"reports/{timestamp}/{os.path.basename(filename)}")
            blob.upload_from_filename(filename)
            uploaded.append(filename)
            print(f" -> Uploaded {filename}")
        else:
            print(f" -> Could not find {filename}, skipping.")
    return uploaded


def entry_point(request):
    """Dette er funktionen Google kalder"""
    try:
        os.chdir(WORK_DIR)
        print(f"Working directory changed to: {os.getcwd()}")

        config = Config.from_env()
        run(config)
        upload_files_to_bucket(config, config.output_files)
        return "Audit Success", 200

    except Exception as e:
        print(f"CRITICAL ERROR: {str(e)}")
        # Cloud Scheduler skal kunne se at kørslen fejlede
        return f"Error: {str(e)}", 500


def _positive_int(value: str) -> int:
    n = int(value)
    if n <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {n}")
    return n


def parse_args(argv=None):
    ap = argparse.ArgumentParser(
        description="Split active GitLab users into active_users.csv / inactive_users.csv by group and project membership"
    )
    ap.add_argument("--host", help="GitLab base URL (default: $HOST)")
    ap.add_argument("--page-size", type=_positive_int, help="users per page (default: $PAGE_SIZE or 100)")
    ap.add_argument("--timeout", type=_positive_int, help="request timeout in seconds")
    ap.add_argument("--active-file", help="output CSV for users with memberships")
    ap.add_argument("--inactive-file", help="output CSV for users without memberships")
    ap.add_argument("--strict", action="store_true",
                    help="exit 1 if validation fails or pagination stopped on an API error")
    return ap.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    config = Config.from_env()

    overrides = {}
    if args.host:
        overrides["host"] = args.host.rstrip("/")
    if args.page_size:
        overrides["page_size"] = args.page_size
    if args.timeout:
        overrides["timeout"] = args.timeout
    if args.active_file:
        overrides["active_users_file"] = args.active_file
    if args.inactive_file:
        overrides["inactive_users_file"] = args.inactive_file
    if overrides:
        config = replace(config, **overrides)

    summary, report = run(config)

    if args.strict and (not report.ok or summary.stopped_on_error):
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
