import sys

from modbus_scanner.client.cli import main

sys.exit(main())
