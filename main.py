#!/usr/bin/env python3
from cas import CAS
import logging

def main():
    logging.basicConfig(level=logging.INFO)
    cas = CAS()
    for f in cas.factors("12x^2*x^3"):
        print(f)
    print(cas.simplify("(6x^2*y)/(4x)"))
    print(cas.rref([[2, 4], [1, 3]]))

if __name__ == "__main__":
    main()
