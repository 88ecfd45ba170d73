from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.security import CurrentUser, UserRole, require_roles
from database.database import database
from domain.entities import HierarchicalEmployee
from domain.results import ErrorKind, ServiceResult
from services.employee_service import EmployeeService

from .dto import (
    CommonResponse,
    EmployeeCreateRequest,
    EmployeeResponse,
    EmployeeUpdateRequest,
    HierarchicalEmployeeResponse,
    SubordinatesResponse,
)

# ========== ROUTER ==========
router = APIRouter(prefix='/api/employees', tags=['employees'])

ERROR_STATUS = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.SELF_MANAGEMENT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CIRCULAR_HIERARCHY: status.HTTP_409_CONFLICT,
    ErrorKind.HAS_SUBORDINATES: status.HTTP_409_CONFLICT,
    ErrorKind.STORAGE_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.STORAGE_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


# ========== DEPENDENCIES ==========
async def get_session():
    async with database.get_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_service(session: AsyncSession = Depends(get_session)) -> EmployeeService:
    return EmployeeService(session)


def unwrap(result: ServiceResult):
    if not result.success:
        raise HTTPException(status_code=ERROR_STATUS[result.error], detail=result.message)
    return result.data


def to_tree_response(node: HierarchicalEmployee) -> HierarchicalEmployeeResponse:
    return HierarchicalEmployeeResponse(
        id=node.id,
        name=node.name,
        position=node.position,
        manager_id=node.manager_id,
        created_at=node.created_at,
        updated_at=node.updated_at,
        subordinates=[to_tree_response(s) for s in node.subordinates],
        total_subordinates_count=node.total_subordinates_count,
    )


# ========== ENDPOINTS ==========

@router.post(
    '',
    response_model=CommonResponse[EmployeeResponse],
    status_code=status.HTTP_201_CREATED,
    summary='Create a new employee',
)
async def create_employee(
    request: EmployeeCreateRequest,
    service: EmployeeService = Depends(get_service),
    _: CurrentUser = Depends(require_roles(UserRole.ADMIN)),
) -> CommonResponse[EmployeeResponse]:
    result = await service.create(request.name, request.position, request.manager_id)
    employee = unwrap(result)
    return CommonResponse(message=result.message, data=EmployeeResponse.model_validate(employee))


@router.get(
    '/{id}',
    response_model=CommonResponse[EmployeeResponse],
    status_code=status.HTTP_200_OK,
    summary='Get an employee by ID',
)
async def get_employee(
    id: int,
    service: EmployeeService = Depends(get_service),
    _: CurrentUser = Depends(require_roles(UserRole.ADMIN, UserRole.MANAGER, UserRole.USER)),
) -> CommonResponse[EmployeeResponse]:
    result = await service.find_one(id)
    employee = unwrap(result)
    return CommonResponse(message=result.message, data=EmployeeResponse.model_validate(employee))


@router.get(
    '/{id}/subordinates',
    response_model=CommonResponse[SubordinatesResponse],
    status_code=status.HTTP_200_OK,
    summary='Get the full subordinate tree of an employee',
)
async def get_subordinates(
    id: int,
    service: EmployeeService = Depends(get_service),
    _: CurrentUser = Depends(require_roles(UserRole.ADMIN, UserRole.MANAGER)),
) -> CommonResponse[SubordinatesResponse]:
    result = await service.find_all_subordinates(id)
    view = unwrap(result)
    return CommonResponse(
        message=result.message,
        data=SubordinatesResponse(employee=to_tree_response(view.employee), message=view.note),
    )


@router.patch(
    '/{id}',
    response_model=CommonResponse[EmployeeResponse],
    status_code=status.HTTP_200_OK,
    summary='Edit an employee or reassign their manager',
)
async def update_employee(
    id: int,
    request: EmployeeUpdateRequest,
    service: EmployeeService = Depends(get_service),
    _: CurrentUser = Depends(require_roles(UserRole.ADMIN, UserRole.MANAGER)),
) -> CommonResponse[EmployeeResponse]:
    result = await service.update(id, request.changes())
    employee = unwrap(result)
    return CommonResponse(message=result.message, data=EmployeeResponse.model_validate(employee))


@router.delete(
    '/{id}',
    response_model=CommonResponse[None],
    status_code=status.HTTP_200_OK,
    summary='Delete an employee without direct reports',
    responses={
        404: {'description': 'Employee not found'},
        409: {'description': 'Employee still has direct reports'},
    },
)
async def delete_employee(
    id: int,
    service: EmployeeService = Depends(get_service),
    _: CurrentUser = Depends(require_roles(UserRole.ADMIN)),
) -> CommonResponse[None]:
    result = await service.remove(id)
    unwrap(result)
    return CommonResponse(message=result.message)
