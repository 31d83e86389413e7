#!/usr/bin/env python3
"""Evolution API host provisioning: CLI entrypoint."""

from evodock.evodock import main

if __name__ == "__main__":
    main()
