from .sandbox import SandboxProvider
from .searates import SeaRatesProvider
from .sendcloud import SendcloudProvider
from .shippo import ShippoProvider
