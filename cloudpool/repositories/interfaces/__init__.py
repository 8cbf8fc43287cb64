from .pool import IPoolRepository
from .pool_family import IPoolFamilyRepository
from .quota import IQuotaRepository
from .permission import IPermissionRepository
from .role import IRoleRepository
from .user import IUserRepository
from .instance import IInstanceRepository
from .deployment import IDeploymentRepository
