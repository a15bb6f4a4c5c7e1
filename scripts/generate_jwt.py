from jose import jwt
import argparse
import datetime

"""
CLI utility to generate a bearer token for testing the admin API endpoints.
Requires the JWT secret to be provided on the command line.

Example usage:
    python generate_jwt.py --secret 'your-actual-secret' --user-id 1 --role admin --email admin@example.org --seconds 600
"""

ROLES = ["admin", "content_manager", "content_reviewer"]


def main():
    parser = argparse.ArgumentParser(description="Generate a test JWT.")
    parser.add_argument("--secret", required=True, help="JWT secret key")
    parser.add_argument("--user-id", required=True, help="Admin user ID (sub claim)")
    parser.add_argument("--role", required=True, choices=ROLES, help="Back-office role")
    parser.add_argument("--email", default=None, help="Email claim")
    parser.add_argument("--name", default=None, help="Display name claim")
    parser.add_argument("--algorithm", default="HS256", help="Signing algorithm (default: HS256)")
    parser.add_argument("--seconds", type=int, default=3600, help="Token expiry in seconds (default: 3600, i.e. 1 hour)")
    args = parser.parse_args()

    payload = {
        "sub": args.user_id,
        "role": args.role,
        "email": args.email,
        "name": args.name,
        "exp": datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(seconds=args.seconds)
    }
    print({k: v for k, v in payload.items() if k != "exp"})
    token = jwt.encode(payload, args.secret, algorithm=args.algorithm)
    print("----------------------------------------------------------\n")
    print(token)


if __name__ == "__main__":
    main()
