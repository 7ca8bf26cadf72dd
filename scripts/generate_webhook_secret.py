import secrets


def main():
    secret = secrets.token_hex(32)
    print("\n🔐 Generated webhook secret:\n")
    print(secret)
    print("\n📋 Copy this to your .env file as REVALIDATE_WEBHOOK_SECRET\n")


if __name__ == "__main__":
    main()
