"""vCard 3.0 rendering and business-card text parsing."""

import re

from app.db.models import Contact
from app.schemas.contacts import ContactFields

_NAME_LINE = re.compile(r"^[A-Za-z\s.]{2,40}$")
_THREE_DIGITS = re.compile(r"\d{3}")
_EMAIL = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
_PHONE = re.compile(r"(\+?1[-.\s]?)?\(?([0-9]{3})\)?[-.\s]?([0-9]{3})[-.\s]?([0-9]{4})")
_WEBSITE = re.compile(
    r"(?:https?://)?(?:www\.)?[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?(?:\.[a-zA-Z]{2,})+"
)
_ADDRESS = re.compile(r"\d+.*?\b(street|st|avenue|ave|road|rd|drive|dr|lane|ln|boulevard|blvd)\b", re.IGNORECASE)

_COMPANY_MARKERS = ("llc", "inc", "corp", "ltd", "company", "group", "associates", "partners")
_TITLE_KEYWORDS = (
    "manager", "director", "president", "ceo", "cto", "cfo", "vp", "vice president", "senior",
    "lead", "head", "chief", "founder", "owner", "consultant", "specialist", "coordinator",
    "supervisor", "analyst", "engineer", "developer", "designer",
)


def _escape(value: str) -> str:
    """Escape a vCard text value (RFC 2426 section 4)."""
    return (
        value.replace("\\", "\\\\")
        .replace("\n", "\\n")
        .replace(";", "\\;")
        .replace(",", "\\,")
    )


def generate_vcard(contact: Contact) -> str:
    """
    Render a contact as a vCard 3.0 document.

    Empty fields are omitted; lines are CRLF-separated.
    """
    first, last = contact.first_name or "", contact.last_name or ""
    full_name = f"{first} {last}".strip() or contact.company or "Contact"

    lines = ["BEGIN:VCARD", "VERSION:3.0", f"FN:{_escape(full_name)}"]
    if first or last:
        lines.append(f"N:{_escape(last)};{_escape(first)};;;")
    if contact.company:
        lines.append(f"ORG:{_escape(contact.company)}")
    if contact.job_title:
        lines.append(f"TITLE:{_escape(contact.job_title)}")
    if contact.email:
        lines.append(f"EMAIL;TYPE=INTERNET:{contact.email}")
    if contact.phone:
        lines.append(f"TEL:{contact.phone}")
    if contact.website:
        lines.append(f"URL:{contact.website}")
    if contact.address:
        lines.append(f"ADR:;;{_escape(contact.address)};;;;")
    if contact.notes:
        lines.append(f"NOTE:{_escape(contact.notes)}")
    lines += ["PRODID:GabAi Contact Manager", "END:VCARD"]
    return "\r\n".join(lines) + "\r\n"


def vcard_filename(contact: Contact) -> str:
    """ASCII-only download name; header values must encode as latin-1."""
    name = "_".join(part for part in (contact.first_name, contact.last_name) if part)
    return (re.sub(r"[^a-zA-Z0-9-]+", "_", name).strip("_") or "contact") + ".vcf"


def _is_company_line(line: str) -> bool:
    lowered = line.lower()
    return any(marker in lowered for marker in _COMPANY_MARKERS)


def extract_contact_from_text(text: str) -> ContactFields:
    """
    Best-effort extraction of contact fields from business-card text.

    The first short alphabetic line that is not a company becomes the name;
    email, phone, website and street address are found by pattern, the job
    title by keyword. The company is a line with a company marker, else the
    first remaining short line.
    """
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    fields: dict[str, str | None] = {}

    name_line = next(
        (
            line
            for line in lines
            if _NAME_LINE.match(line)
            and "@" not in line
            and not _THREE_DIGITS.search(line)
            and not _is_company_line(line)
        ),
        None,
    )
    if name_line:
        first, _, rest = name_line.partition(" ")
        fields["first_name"] = first
        fields["last_name"] = rest.strip() or None

    email = _EMAIL.search(text)
    if email:
        fields["email"] = email.group(0)

    phone = _PHONE.search(text)
    if phone:
        fields["phone"] = phone.group(0).strip()

    title_line = next(
        (line for line in lines if any(k in line.lower() for k in _TITLE_KEYWORDS)), None
    )
    if title_line:
        fields["job_title"] = title_line

    company_line = next((line for line in lines if _is_company_line(line)), None)
    if company_line is None:
        company_line = next(
            (
                line
                for line in lines
                if line not in (name_line, title_line)
                and 3 < len(line) < 50
                and "@" not in line
                and not _THREE_DIGITS.search(line)
                and not _WEBSITE.fullmatch(line)
            ),
            None,
        )
    if company_line:
        fields["company"] = company_line

    # Strip emails first so their domains are not taken for the website
    website = _WEBSITE.search(_EMAIL.sub(" ", text))
    if website:
        url = website.group(0)
        fields["website"] = url if url.startswith("http") else f"https://{url}"

    address_line = next((line for line in lines if _ADDRESS.search(line)), None)
    if address_line:
        fields["address"] = address_line

    return ContactFields(**fields)


def follow_up_title(contact: ContactFields | Contact) -> str:
    name = " ".join(p for p in (contact.first_name, contact.last_name) if p)
    return f"Follow up with {name or 'new contact'}"
