from auto_props.cli.auto_props import main

if __name__ == "__main__":
    main()
