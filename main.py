import os
import sys
from replygen.client import generate_reply
from replygen.config import setup_logging
from replygen.controller import ReplyController
from replygen.schema import TONES

# Only for Running with CLI/Debug
def cli_session():
    controller = ReplyController()

    print("\n📧 Email Reply Generator (CLI)\n")
    print("Paste the email, then finish with Ctrl-D:")
    controller.set_email_content(sys.stdin.read())

    tone = os.getenv("REPLY_TONE", "")
    controller.set_tone(tone if tone in TONES else "")

    if not controller.submit(generate_reply):
        print("⚠️  Nothing to send.")
        return 1
    if controller.error:
        print(controller.error)
        return 1

    print("\n—— Generated Reply ——————————————————")
    print(controller.reply)
    print("—————————————————————————————————————\n")
    return 0

if __name__ == "__main__":
    if "--cli" in sys.argv[1:]:
        setup_logging()
        sys.exit(cli_session())
    from ui.app import main
    main()
