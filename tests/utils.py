import base64
import csv
import io

from app.schemas.participant import ROSTER_COLUMNS, ParticipantRecord

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"signature-pixels"
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"photo-pixels"
SIGNATURE = "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode()
PHOTO = "data:image/jpeg;base64," + base64.b64encode(JPEG_BYTES).decode()


def roster_csv(rows, columns=ROSTER_COLUMNS):
    """Build CSV bytes from a list of {column: value} dicts."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(columns)
    for row in rows:
        writer.writerow([row.get(column, "") for column in columns])
    return buffer.getvalue().encode("utf-8")


def runner(bib_no, first_name="Ann", last_name="Runner", **extra):
    return ParticipantRecord(bib_no=str(bib_no), first_name=first_name, last_name=last_name, **extra)
