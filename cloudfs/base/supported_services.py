from typing import Literal


existing_providers = Literal["cos"]
