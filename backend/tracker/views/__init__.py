from tracker.views.auth_handlers import (
    login as login,
)
from tracker.views.auth_handlers import (
    logout as logout,
)
from tracker.views.car_handlers import (
    create_car as create_car,
)
from tracker.views.car_handlers import (
    delete_car as delete_car,
)
from tracker.views.car_handlers import (
    list_cars as list_cars,
)
from tracker.views.car_handlers import (
    update_car as update_car,
)
from tracker.views.page_handlers import (
    create_templates as create_templates,
)
from tracker.views.page_handlers import (
    index as index,
)
