"""Console entry-point for the cheer bot server.

Run with:

.. code-block:: bash

    python -m slack_cheer.webhook --port 3000

This delegates to `slack_cheer.webhook.entry.main()`.
"""

from slack_cheer.webhook.entry import main

if __name__ == "__main__":
    main()
