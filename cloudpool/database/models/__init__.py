from .permission import Permission, PermissionObjectType, Privilege
from .role import Role, RolePrivilege
from .user import User
from .quota import Quota
from .pool_family import PoolFamily
from .pool import Pool
from .provider_account import ProviderAccount
from .instance import Instance, InstanceState
from .deployment import Deployment
from .catalog import Catalog, Deployable, DeployableImage, Image, ProviderImage
