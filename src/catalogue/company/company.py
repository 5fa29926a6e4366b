"""Company aggregate — the vendor that lists products."""

from datetime import datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, String

from catalogue.domain import catalogue


@catalogue.event(part_of="Company")
class CompanyRegistered:
    __version__ = 1

    company_id: Identifier(required=True)
    owner_id: Identifier(required=True)
    name: String(required=True)
    registered_at: DateTime(required=True)


@catalogue.event(part_of="Company")
class CompanyApproved:
    __version__ = 1

    company_id: Identifier(required=True)
    approved_at: DateTime(required=True)


@catalogue.aggregate
class Company:
    owner_id: Identifier(required=True)
    name: String(required=True, max_length=255)
    gst_number: String(max_length=15)
    certificate_url: String(max_length=500)
    logo_url: String(max_length=500)
    is_approved: Boolean(default=False)
    registered_at: DateTime(default=datetime.now)

    @classmethod
    def register(cls, owner_id, name, gst_number=None, certificate_url=None, logo_url=None):
        now = datetime.now()
        company = cls(
            owner_id=owner_id,
            name=name,
            gst_number=gst_number,
            certificate_url=certificate_url,
            logo_url=logo_url,
            registered_at=now,
        )
        company.raise_(
            CompanyRegistered(
                company_id=company.id,
                owner_id=owner_id,
                name=name,
                registered_at=now,
            )
        )
        return company

    def approve(self):
        if self.is_approved:
            raise ValidationError({"is_approved": ["Company is already approved"]})

        now = datetime.now()
        self.is_approved = True
        self.raise_(CompanyApproved(company_id=self.id, approved_at=now))


@catalogue.repository(part_of=Company)
class CompanyRepository:
    def owned_by(self, owner_id) -> Company | None:
        results = self._dao.query.filter(owner_id=str(owner_id)).all().items
        return results[0] if results else None
