"""
Accelo resource models.

Every field is optional: which fields come back depends on the ``_fields``
argument of the call, and linked objects arrive either expanded (an object)
or as a bare identifier. Unknown fields are kept on the model.
"""

from pydantic import BaseModel, ConfigDict


class AcceloRecord(BaseModel):
    """Base for all Accelo objects."""

    # Accelo mixes numeric and string identifiers
    model_config = ConfigDict(
        extra="allow", populate_by_name=True, coerce_numbers_to_str=True
    )

    id: str | None = None


class Status(AcceloRecord):
    title: str | None = None
    standing: str | None = None
    color: str | None = None


class RequestType(AcceloRecord):
    title: str | None = None
    standing: str | None = None


class Company(AcceloRecord):
    name: str | None = None
    website: str | None = None
    phone: str | None = None
    standing: str | None = None


class Contact(AcceloRecord):
    firstname: str | None = None
    surname: str | None = None
    email: str | None = None
    mobile: str | None = None

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.firstname, self.surname) if part)


class Staff(AcceloRecord):
    firstname: str | None = None
    surname: str | None = None
    email: str | None = None
    username: str | None = None
    title: str | None = None

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.firstname, self.surname) if part)


class Affiliation(AcceloRecord):
    email: str | None = None
    phone: str | None = None
    mobile: str | None = None
    position: str | None = None
    company: Company | str | None = None
    contact: Contact | str | None = None

    @property
    def company_record(self) -> Company | None:
        return self.company if isinstance(self.company, Company) else None

    @property
    def contact_record(self) -> Contact | None:
        return self.contact if isinstance(self.contact, Contact) else None


class Issue(AcceloRecord):
    title: str | None = None
    description: str | None = None
    standing: str | None = None
    status: Status | str | None = None
    assignee: Staff | str | None = None
    contact: Contact | str | None = None
    company: Company | str | None = None
    affiliation: Affiliation | str | None = None

    @property
    def contact_record(self) -> Contact | None:
        return self.contact if isinstance(self.contact, Contact) else None

    @property
    def company_record(self) -> Company | None:
        return self.company if isinstance(self.company, Company) else None

    @property
    def status_title(self) -> str | None:
        if isinstance(self.status, Status):
            return self.status.title
        return self.status

    @property
    def assignee_id(self) -> str | None:
        if isinstance(self.assignee, Staff):
            return self.assignee.id
        return None if self.assignee is None else str(self.assignee)


class Request(AcceloRecord):
    title: str | None = None
    body: str | None = None
    standing: str | None = None
    claimer: Staff | str | None = None
    conversion_id: str | None = None
    type: RequestType | str | None = None
    affiliation: Affiliation | str | None = None

    @property
    def type_title(self) -> str | None:
        if isinstance(self.type, RequestType):
            return self.type.title
        return self.type

    @property
    def claimer_id(self) -> str | None:
        if isinstance(self.claimer, Staff):
            return self.claimer.id
        return self.claimer

    @property
    def affiliation_record(self) -> Affiliation | None:
        return self.affiliation if isinstance(self.affiliation, Affiliation) else None


class Task(AcceloRecord):
    title: str | None = None
    description: str | None = None
    against_type: str | None = None
    against_id: str | None = None
    assignee: Staff | str | None = None
    status: Status | str | None = None
    issue: Issue | str | None = None
    contact: Contact | str | None = None

    @property
    def issue_record(self) -> Issue | None:
        return self.issue if isinstance(self.issue, Issue) else None

    @property
    def contact_record(self) -> Contact | None:
        return self.contact if isinstance(self.contact, Contact) else None

    @property
    def status_title(self) -> str | None:
        if isinstance(self.status, Status):
            return self.status.title
        return self.status

    @property
    def assignee_id(self) -> str | None:
        if isinstance(self.assignee, Staff):
            return self.assignee.id
        return None if self.assignee is None else str(self.assignee)


class Activity(AcceloRecord):
    subject: str | None = None
    body: str | None = None
    against_type: str | None = None
    against_id: str | None = None
    owner_type: str | None = None
    owner_id: str | None = None
    medium: str | None = None
    staff: Staff | str | None = None

    @property
    def staff_id(self) -> str | None:
        if isinstance(self.staff, Staff):
            return self.staff.id
        return None if self.staff is None else str(self.staff)


class CountResult(BaseModel):
    """Result of a ``/count`` call."""

    model_config = ConfigDict(extra="allow")

    count: int = 0
