import sys

from durable_llama.interface_adapters.cli import main

if __name__ == "__main__":
    sys.exit(main())
