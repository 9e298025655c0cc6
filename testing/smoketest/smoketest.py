import marshal

from pycmarshal import MarshalStr, loads_marshal


def main() -> None:
    msg = "Don't let the smoke out!"
    msg_out = loads_marshal(marshal.dumps(msg))
    if msg_out != MarshalStr(msg, msg_out.tag):
        raise AssertionError("Smoke test failed")
    print(msg_out)


if __name__ == "__main__":
    main()
