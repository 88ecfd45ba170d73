import database.models as orm
import domain.entities as domain


class EmployeeMapper:
    @staticmethod
    def to_domain(model: orm.Employee) -> domain.Employee:
        return domain.Employee(
            id=model.id,
            name=model.name,
            position=model.position,
            manager_id=model.manager_id,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def to_orm(entity: domain.Employee) -> orm.Employee:
        return orm.Employee(
            name=entity.name,
            position=entity.position,
            manager_id=entity.manager_id,
        )
