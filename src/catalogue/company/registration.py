"""Company registration and approval — commands and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from catalogue.company.company import Company
from catalogue.domain import catalogue
from shared.exceptions import AlreadyExists


@catalogue.command(part_of="Company")
class RegisterCompany:
    owner_id: Identifier(required=True)
    name: String(required=True, max_length=255)
    gst_number: String(max_length=15)
    certificate_url: String(max_length=500)
    logo_url: String(max_length=500)


@catalogue.command(part_of="Company")
class ApproveCompany:
    company_id: Identifier(required=True)


@catalogue.command_handler(part_of=Company)
class CompanyRegistrationHandler:
    @handle(RegisterCompany)
    def register_company(self, command):
        repo = current_domain.repository_for(Company)
        if repo.owned_by(command.owner_id) is not None:
            raise AlreadyExists({"owner_id": ["This account already manages a company"]})

        company = Company.register(
            owner_id=command.owner_id,
            name=command.name,
            gst_number=command.gst_number,
            certificate_url=command.certificate_url,
            logo_url=command.logo_url,
        )
        repo.add(company)
        return str(company.id)

    @handle(ApproveCompany)
    def approve_company(self, command):
        repo = current_domain.repository_for(Company)
        company = repo.get(command.company_id)
        company.approve()
        repo.add(company)
