from studymate.services.auth.security import (
    create_access_token,
    decode_token,
)
from studymate.services.auth.service import (
    CurrentUser,
    get_current_user,
)
