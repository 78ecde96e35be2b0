"""
Dependency injection container using dependency-injector.
Wires the HR backend client, repositories, services, and controllers.
"""

from dependency_injector import containers, providers

from hrms_leave.core.config import settings
from hrms_leave.core.integrations.http.http_client import HttpClient
from hrms_leave.repositories.date_fact_repository import DateFactRepository
from hrms_leave.repositories.leave_application_repository import LeaveApplicationRepository
from hrms_leave.repositories.leave_policy_repository import LeavePolicyRepository
from hrms_leave.services.eligibility_service import EligibilityService
from hrms_leave.services.health_service import HealthService
from hrms_leave.services.leave_form_service import LeaveFormService
from hrms_leave.services.submission_service import SubmissionValidator
from hrms_leave.controllers.leave_application_controller import LeaveApplicationController
from hrms_leave.controllers.leave_eligibility_controller import LeaveEligibilityController


def _auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"} if token else {}


class Container(containers.DeclarativeContainer):
    """Dependency injection container."""

    # Configuration
    config = providers.Configuration()

    # HR backend client, one per request so the caller's token is forwarded
    hr_client = providers.Factory(
        HttpClient,
        base_url=config.hr_api_base_url,
        timeout=config.hr_api_timeout,
        max_retries=config.hr_api_max_retries,
        retry_delay=config.hr_api_retry_delay,
    )

    # Services
    eligibility_service = providers.Singleton(
        EligibilityService,
    )

    submission_validator = providers.Singleton(
        SubmissionValidator,
    )

    health_service = providers.Singleton(
        HealthService,
    )

    # Controllers
    leave_eligibility_controller = providers.Factory(
        LeaveEligibilityController,
        eligibility_service=eligibility_service,
        validator=submission_validator,
    )


def build_leave_application_controller(
    container: Container,
    employee_id: str,
    token: str,
) -> LeaveApplicationController:
    """Assemble the per-request controller around an authenticated HR client."""
    client = container.hr_client(headers=_auth_headers(token))
    form_service = LeaveFormService(
        fact_repo=DateFactRepository(client, employee_id),
        policy_repo=LeavePolicyRepository(client, employee_id),
        application_repo=LeaveApplicationRepository(client, employee_id),
        eligibility_service=container.eligibility_service(),
        validator=container.submission_validator(),
    )
    return LeaveApplicationController(form_service, client=client)


def configure(container: Container) -> Container:
    container.config.from_dict({
        "hr_api_base_url": settings.HR_API_BASE_URL,
        "hr_api_timeout": settings.HR_API_TIMEOUT,
        "hr_api_max_retries": settings.HR_API_MAX_RETRIES,
        "hr_api_retry_delay": settings.HR_API_RETRY_DELAY,
    })
    return container


# Global container instance
_container: Container = None


def get_container() -> Container:
    """Get the global dependency injection container."""
    global _container
    if _container is None:
        _container = configure(Container())
    return _container
