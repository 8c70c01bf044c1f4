"""
Profile management endpoints.

Reads are public. Writes need a bearer token and count against the write
rate limit. Updates are full replacements: skills, projects and work
experience missing from the body are removed.
"""

from fastapi import APIRouter, Depends, status

from ..auth.dependencies import require_auth
from ..dependencies import get_profile_service
from ..dependencies.rate_limit import enforce_write_rate_limit
from ..schemas import MessageResponse, ProfileCreatedResponse, ProfileRequest, ProfileResponse
from ..services import ProfileService

router = APIRouter(prefix="/profile", tags=["profile"], dependencies=[Depends(require_auth)])

write_dependencies = [Depends(enforce_write_rate_limit)]


@router.get("", response_model=list[ProfileResponse])
def list_profiles(service: ProfileService = Depends(get_profile_service)):
    """All profiles newest-first with skills, projects and work experience."""
    return service.list_profiles()


@router.post(
    "",
    response_model=ProfileCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=write_dependencies,
)
def create_profile(
    payload: ProfileRequest,
    service: ProfileService = Depends(get_profile_service),
):
    """Create a profile with its children in one transaction. 409 PROFILE_EXISTS on a taken email."""
    profile = service.create_profile(payload)
    return {"message": "Profile created successfully", "profileId": profile.id}


@router.put("", response_model=MessageResponse, dependencies=write_dependencies)
def update_latest_profile(
    payload: ProfileRequest,
    service: ProfileService = Depends(get_profile_service),
):
    """
    Full-replace the most recently created profile.

    Scalar fields are overwritten and every skill, project and work row is
    swapped for the ones in the body, all in one transaction.
    """
    service.update_latest_profile(payload)
    return {"message": "Profile updated successfully"}


@router.delete("", response_model=MessageResponse, dependencies=write_dependencies)
def delete_all_profiles(service: ProfileService = Depends(get_profile_service)):
    """Delete every profile (children cascade). 404 PROFILE_NOT_FOUND when there are none."""
    service.delete_all_profiles()
    return {"message": "Profile deleted successfully"}


@router.delete(
    "/projects/{project_id}",
    response_model=MessageResponse,
    dependencies=write_dependencies,
)
def delete_project(project_id: str, service: ProfileService = Depends(get_profile_service)):
    """Delete one project. 400 INVALID_PROJECT_ID, 404 PROJECT_NOT_FOUND."""
    service.delete_project(project_id)
    return {"message": "Project deleted successfully"}


@router.delete(
    "/work-experience/{work_id}",
    response_model=MessageResponse,
    dependencies=write_dependencies,
)
def delete_work_experience(work_id: str, service: ProfileService = Depends(get_profile_service)):
    """Delete one work experience entry. 400 INVALID_WORK_ID, 404 WORK_NOT_FOUND."""
    service.delete_work_experience(work_id)
    return {"message": "Work experience deleted successfully"}


@router.put("/{profile_id}", response_model=MessageResponse, dependencies=write_dependencies)
def update_profile(
    profile_id: int,
    payload: ProfileRequest,
    service: ProfileService = Depends(get_profile_service),
):
    """Full-replace one profile by id. 404 PROFILE_NOT_FOUND when it does not exist."""
    service.update_profile(profile_id, payload)
    return {"message": "Profile updated successfully"}


@router.delete("/{profile_id}", response_model=MessageResponse, dependencies=write_dependencies)
def delete_profile(profile_id: int, service: ProfileService = Depends(get_profile_service)):
    """Delete one profile by id (children cascade). 404 PROFILE_NOT_FOUND when it does not exist."""
    service.delete_profile(profile_id)
    return {"message": "Profile deleted successfully"}
