# experiments/run_demo.py
from toaster.device import Toaster
from toaster.exceptions import InvalidOperation


def main() -> None:
    print("testing allowed transitions")
    toaster = Toaster()
    toaster.insert_bread()
    toaster.pull_lever()
    toaster.eject_bread()
    toaster.remove_bread()

    print("testing disallowed transitions")
    toaster2 = Toaster()
    try:
        toaster2.pull_lever()
    except InvalidOperation as e:
        print("ERROR:", e)
    print("Final:", toaster2.state.value)


if __name__ == "__main__":
    main()
